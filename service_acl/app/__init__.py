"""
ACL evaluator package.

Decides whether an identity may perform a privilege on a resource,
optionally conditioned on a domain object. It provides:

- app.rules: Role model, rule compiler, observer role composition and
  the recursive evaluator.
- app.guard: Authentication/authorization boundary for request handlers.

Guidelines:
- Build one evaluator per identity snapshot; roles are fixed for its
  lifetime.
- Assertions must be pure and total; their exceptions are not caught.
"""
