"""
Core application modules.
Contains essential infrastructure components:
- access: Operation-to-role mapping and the authorization decision
- bootstrap: Application initialization and default admin creation
- db: Database configuration and connection management
- errors: Application errors and their HTTP status/message
- security: Password hashing and access token issuing/verification
"""
