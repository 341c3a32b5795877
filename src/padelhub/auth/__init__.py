"""Authentication and authorization.

Two layers:
1. Identity — email/password → JWT access/refresh tokens → CurrentIdentity
2. Access scoping — AccessAuthority decides, per request, whether an
   identity may perform an operation on a resource and which rows it sees.
"""
