"""Authentication and authorization.

Three pieces:
1. PasswordHasher → bcrypt hashing of account passwords
2. TokenCodec → signed, time-bounded JWT session tokens
3. Request gate + self-access check → FastAPI dependencies for the gateway

The gate resolves a bearer token to a CurrentIdentity; the access check
then compares that identity with the {user_id} in the resource path.
"""
