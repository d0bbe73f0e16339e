"""
HTTP-facing building blocks: error taxonomy, response envelope,
request schemas and FastAPI dependencies.
"""
