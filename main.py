import uvicorn
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from orcid_login.settings import env_settings
from orcid_login.setup import setup_all

app = FastAPI(
    title=env_settings().PLATFORM_TITLE,
    description="ORCiD login",
    version="0.1",
    default_response_class=ORJSONResponse,
)

setup_all(app)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=env_settings().PORT)
