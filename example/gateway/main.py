"""
Minimal Gateway example - GraphQL over a JSON REST API.

Run with any ASGI server, e.g.:
    uvicorn example.gateway.main:app
"""

from restgraph import Gateway

SDL = """
type User {
  id: ID
  name: String
  email: String
}

input UserInput {
  name: String
  email: String
}

type Query {
  user: User
  users: [User]
}

type Mutation {
  createUser(input: UserInput): User
}

type Subscription {
  userUpdated: User
}
"""

gateway = Gateway(
    schema=SDL,
    config={
        "baseUrl": "https://jsonplaceholder.typicode.com",
        "operationHeaders": {"Authorization": "Bearer {context.token}"},
        "operations": [
            {"type": "query", "field": "user", "path": "/users/{args.id}"},
            {"type": "query", "field": "users", "path": "/users"},
            {
                "type": "mutation",
                "field": "createUser",
                "method": "POST",
                "path": "/users",
                "requestBaseBody": {"source": "restgraph"},
            },
            {"type": "subscription", "field": "userUpdated", "pubsubTopic": "user.{args.id}.updated"},
        ],
    },
    context_factory=lambda request: {
        "request": request,
        "token": request.headers.get("authorization", "").removeprefix("Bearer "),
    },
)

app = gateway.app
