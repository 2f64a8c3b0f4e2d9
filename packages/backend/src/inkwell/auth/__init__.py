"""Authentication and authorization.

Learn: Three pieces, applied in this order on every protected request:
1. Credentials → bcrypt-verified login issues a signed JWT (credentials.py)
2. Bearer token → validated and turned into a CurrentIdentity (dependencies.py)
3. Ownership → the identity must be the author of the post/comment (ownership.py)

Tokens are stateless: nothing is stored server-side, and a token stops
working only when it expires.
"""
