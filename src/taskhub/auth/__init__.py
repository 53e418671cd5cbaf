"""Authentication and authorization.

Learn: Users trade email/password for a signed bearer token (JWT). Each
protected request then passes through up to three gates, in order:

1. Authentication — verify the token, rebuild the Principal from its claims
2. Role — principal.role must be at least the route's minimum tier
3. Ownership — for record-scoped routes, principal must own the record
   (or be an admin)

All gates are pure functions of their inputs; nothing here keeps state
between requests.
"""
