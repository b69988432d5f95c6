"""HTTP routers: the GraphQL endpoint and the browser pages."""
