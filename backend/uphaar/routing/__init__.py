# Routing package init
"""
Uphaar Backend: Routing Core
============================

    - matcher.py:     match_path(), the single authoritative path matcher
    - table.py:       RouteDefinition and the immutable, ordered RouteTable
    - dispatcher.py:  Dispatcher (match → auth → handle → respond)
"""
