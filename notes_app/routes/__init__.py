"""
Notes — API Routes Package
============================

Route Inventory:
    - notes.py:   GET    /notes            (list, newest first)
                  POST   /notes            (create)
                  PUT    /notes/{note_id}  (partial update)
                  DELETE /notes/{note_id}  (delete)
                  GET    /tags             (distinct sorted tags)
    - health.py:  GET    /                 (liveness message)
                  GET    /health           (database readiness)

Routes are thin: they parse the request, call NoteService and pick the
status code. Business logic belongs in services.
"""
