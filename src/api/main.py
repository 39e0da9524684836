"""FastAPI application exposing the publisher over HTTP."""

from collections.abc import Iterator

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from publisher.clients.base import ConfigurationError, NotConnectedError, PublishFailedError
from publisher.credentials import EnvCredentialResolver
from publisher.models import AppMetadata, EnvVarSpec, GeneratedFile, PublishRequest, ScaffoldFile
from publisher.orchestrator import PublishOrchestrator
from store import DeploymentStore, get_adapter

app = FastAPI(
    title="Repo Publisher API",
    description="Publish generated web apps to GitHub as a single atomic commit",
    version="0.1.0",
)

# Enable CORS for the builder frontend in development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:3001"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GeneratedFileIn(BaseModel):
    path: str
    content: str
    language: str = "text"


class ScaffoldFileIn(BaseModel):
    path: str
    content: str
    label: str | None = None


class EnvVarIn(BaseModel):
    key: str
    description: str = ""
    required: bool = False
    defaultValue: str | None = None


class PublishBody(BaseModel):
    """Request body for ``POST /publish``; field names follow the builder's JSON."""

    organizationId: str
    repoName: str
    appName: str
    generatedFiles: list[GeneratedFileIn] = Field(default_factory=list)
    scaffoldFiles: list[ScaffoldFileIn] = Field(default_factory=list)
    description: str | None = None
    isPrivate: bool = True
    organizationName: str = "Unknown"
    sdkVersion: str = "1.0.0"
    requiredEnvVars: list[EnvVarIn] = Field(default_factory=list)
    appId: str | None = None

    def to_request(self) -> PublishRequest:
        return PublishRequest(
            organization_id=self.organizationId,
            app=AppMetadata(
                name=self.appName,
                organization_name=self.organizationName,
                sdk_version=self.sdkVersion,
                required_env_vars=[
                    EnvVarSpec(v.key, v.description, v.required, v.defaultValue)
                    for v in self.requiredEnvVars
                ],
            ),
            repo_name=self.repoName,
            generated_files=[GeneratedFile(f.path, f.content, f.language) for f in self.generatedFiles],
            description=self.description,
            is_private=self.isPrivate,
            scaffold_files=[ScaffoldFile(f.path, f.content, f.label) for f in self.scaffoldFiles],
            app_id=self.appId,
        )


def get_deployment_store() -> Iterator[DeploymentStore]:
    with get_adapter() as adapter:
        deployment_store = DeploymentStore(adapter)
        deployment_store.ensure_schema()
        yield deployment_store


def get_orchestrator(
    deployment_store: DeploymentStore = Depends(get_deployment_store),
) -> PublishOrchestrator:
    return PublishOrchestrator(EnvCredentialResolver(), recorder=deployment_store)


def get_validator() -> PublishOrchestrator:
    return PublishOrchestrator(EnvCredentialResolver())


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Repo Publisher API",
        "version": "0.1.0",
        "endpoints": ["/publish", "/validate", "/health"],
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/publish")
def publish(body: PublishBody, orchestrator: PublishOrchestrator = Depends(get_orchestrator)):
    """Publish the posted files and return where they landed."""
    try:
        result = orchestrator.publish(body.to_request())
    except NotConnectedError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except PublishFailedError as e:
        raise HTTPException(status_code=502, detail={"error": str(e), "phase": e.phase}) from e
    return result.to_dict()


@app.get("/validate")
def validate(
    url: str = Query(..., description="https://github.com/<owner>/<repo>"),
    orchestrator: PublishOrchestrator = Depends(get_validator),
):
    """Check that a repository URL is readable without authentication."""
    return orchestrator.validate_repository(url).to_dict()
