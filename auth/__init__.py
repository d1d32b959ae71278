"""
auth — User authentication module.

Provides:
  • Signed bearer token creation & verification
  • Password hashing (bcrypt)
  • Reset-token generation and reset email delivery
  • ``AuthWorkflow`` — register / login / reset / confirm
  • Auth API routes and the ``get_current_user_id`` FastAPI dependency
"""
