"""
Resource controllers.

Each controller validates input, checks existence and ownership through
`auth.guard`, mutates the entity store or delegates to a read view in
`queries`, and returns an `ApiResponse` envelope.
"""
