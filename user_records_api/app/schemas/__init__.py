"""
Record shape and request payload validation.

``fields`` declares the columns of the users table; ``user`` derives
the pydantic request models from those declarations.
"""
