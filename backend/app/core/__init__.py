"""
Core application modules.
Contains essential infrastructure components:
- cors: Origin allow-list and security headers middleware
- db: Database engine, raw queries and schema initialization
- errors: Application error taxonomy mapped to HTTP status codes
- security: Password hashing and verification
"""
