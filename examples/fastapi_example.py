"""Example FastAPI application accepting Telegraf line protocol.

Run with:
    uvicorn examples.fastapi_example:app --reload

Endpoints:
    POST /push             - Convert a line-protocol body into frames (NDJSON)
    GET  /frames           - Latest frame per measurement (NDJSON)
    GET  /frames?name=<m>  - Latest frame for one measurement

Point Telegraf's HTTP output at it:

    [[outputs.http]]
      url = "http://127.0.0.1:8000/push"
      data_format = "influx"
"""

import logging

from fastapi import FastAPI

from lineframes.adapters.frameworks.fastapi import create_frames_router
from lineframes.adapters.storage.in_memory import InMemoryFrameStorage
from lineframes.core.converter import GroupingConverter

logging.basicConfig(level=logging.INFO)

# One wide frame per measurement, ints stored as floats so that feeds mixing
# 3i and 4.5 for one field still merge.
converter = GroupingConverter(use_labels_column=True, float_numbers=True)
frame_storage = InMemoryFrameStorage()

app = FastAPI(title="lineframes example")
app.include_router(create_frames_router(converter, frame_storage))
