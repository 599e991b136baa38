# HTTP package init
"""
Uphaar Backend: Adapter-Independent HTTP Model
==============================================

    - types.py:  HttpRequest, HttpResponse, response helpers, body decoding
    - cors.py:   CorsPolicy shared by both host bindings
"""
