"""
Serving — FastAPI application exposing upload and query endpoints.

``POST /upload`` indexes a text file, ``POST /ask`` returns a whole
answer and ``POST /ask/stream`` streams answer fragments as plain text.
"""
