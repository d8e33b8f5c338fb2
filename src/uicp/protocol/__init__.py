"""
Embedded-block protocol.

Agent text carries fenced protocol blocks::

    ```uicp
    {"uid": "NBAGameScore", "data": {...}}
    ```

The pipeline is extractor → validator → composer. Every function is a pure,
restartable pass over the full accumulated text, so streaming callers simply
re-run compose_segments() as the buffer grows.

Usage::

    from uicp.protocol.composer import compose_segments

    for segment in compose_segments(text):
        ...
"""
