"""
Truck Fare API server.

Serves fare quotes, route previews and truck-category admin on port 8000.
Configure the database and optional OSRM provider through ``.env``
(see ``truckfare/config.py``), then run: uvicorn main:app --reload
"""

import uvicorn

from truckfare.api.app import create_app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
