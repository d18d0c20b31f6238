"""
Notes — Services Layer
========================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services receive a session per call, run queries, and return
       response schemas or raise application exceptions.

Service Inventory:
    - NoteService: note CRUD and tag aggregation
"""
