"""GraphQL documents issued by the pages."""

USER_FIELDS = """
  fragment UserFields on User {
    id
    name
    email
  }
"""

GET_TODOS = (
    """
  query GetTodos {
    todos {
      id
      title
      completed
      flagged
      created_at
      assignedUsers {
        ...UserFields
      }
    }
    users {
      ...UserFields
    }
  }
"""
    + USER_FIELDS
)

GET_USERS = """
  query GetUsers {
    users {
      id
      name
      email
      created_at
      todos {
        id
        title
      }
    }
  }
"""

GET_USER = """
  query GetUser($id: ID!) {
    user(id: $id) {
      id
      name
      email
    }
  }
"""

CREATE_TODO = """
  mutation CreateTodo($title: String!) {
    createTodo(title: $title) {
      id
    }
  }
"""

UPDATE_TODO = """
  mutation UpdateTodo($id: ID!, $title: String, $completed: Boolean, $flagged: Boolean) {
    updateTodo(id: $id, title: $title, completed: $completed, flagged: $flagged) {
      id
      title
      completed
      flagged
    }
  }
"""

TOGGLE_FLAG = """
  mutation ToggleFlag($id: ID!) {
    toggleFlag(id: $id) {
      id
      flagged
    }
  }
"""

DELETE_TODO = """
  mutation DeleteTodo($id: ID!) {
    deleteTodo(id: $id)
  }
"""

DELETE_ALL_TODOS = """
  mutation DeleteAllTodos {
    deleteAllTodos
  }
"""

ASSIGN_TODO = """
  mutation AssignTodo($todoId: ID!, $userId: ID!) {
    assignTodoToUser(todoId: $todoId, userId: $userId) {
      id
    }
  }
"""

UNASSIGN_TODO = """
  mutation UnassignTodo($todoId: ID!, $userId: ID!) {
    unassignTodoFromUser(todoId: $todoId, userId: $userId) {
      id
    }
  }
"""

CREATE_USER = """
  mutation CreateUser($name: String!, $email: String!) {
    createUser(name: $name, email: $email) {
      id
    }
  }
"""

UPDATE_USER = """
  mutation UpdateUser($id: ID!, $name: String!, $email: String!) {
    updateUser(id: $id, name: $name, email: $email) {
      id
    }
  }
"""

DELETE_USER = """
  mutation DeleteUser($id: ID!) {
    deleteUser(id: $id)
  }
"""
