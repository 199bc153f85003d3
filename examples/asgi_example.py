"""Example framework-free ASGI application.

Run with:
    uvicorn examples.asgi_example:app

Then push a batch:
    curl --data-binary 'cpu,host=a usage_idle=92.5 1616403089000000000' \
        http://127.0.0.1:8000/push
"""

from lineframes.adapters.frameworks.asgi import create_asgi_app
from lineframes.adapters.storage.in_memory import InMemoryFrameStorage
from lineframes.core.converter import GroupingConverter

app = create_asgi_app(GroupingConverter(), InMemoryFrameStorage())
