# Store package init
"""
Uphaar Backend: Record Store
============================

    - base.py:       RecordStore interface, Document, Filter, Increment
    - documents.py:  Filtering, ordering and merge rules shared by the stores
    - memory.py:     InMemoryRecordStore (tests, local development)
    - sql.py:        SqlRecordStore (SQLAlchemy async, one JSON records table)
"""
