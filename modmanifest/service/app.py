"""FastAPI application serving a module manifest."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import DEFAULT_OUTPUT, load_root_config
from ..errors import ArtifactError, ConfigError, DiscoveryError, ModManifestError
from ..manifest import GenerationResult, ManifestGenerator
from ..models import ModuleDefinition
from ..registry import ModuleRegistry


class AttributeModel(BaseModel):
    key: Optional[str] = None
    value: str


class CategoryModel(BaseModel):
    name: str
    attributes: List[AttributeModel] = []


class ModuleModel(BaseModel):
    namespace: str
    type_name: str
    qualified_name: str
    categories: List[CategoryModel]


class CategorySummary(BaseModel):
    name: str
    modules: int


class CategoryListResponse(BaseModel):
    categories: List[CategorySummary]


class CategoryResponse(BaseModel):
    name: str
    modules: List[ModuleModel]


class GenerateRequest(BaseModel):
    path: str = "."
    output: Optional[str] = None


class GenerateResponse(BaseModel):
    artifact_path: str
    categories: int
    modules: int


class HealthResponse(BaseModel):
    status: str


def _module_model(module: ModuleDefinition) -> ModuleModel:
    return ModuleModel(
        namespace=module.namespace,
        type_name=module.type_name,
        qualified_name=module.qualified_name,
        categories=[
            CategoryModel(
                name=category.name,
                attributes=[
                    AttributeModel(key=attr.key, value=attr.value)
                    for attr in category.attributes
                ],
            )
            for category in module.categories
        ],
    )


def _default_generator(root: Path) -> ManifestGenerator:
    return ManifestGenerator(load_root_config(root))


def create_app(
    artifact_path: Path | str = DEFAULT_OUTPUT,
    generator_factory: Callable[[Path], ManifestGenerator] = _default_generator,
) -> FastAPI:
    """Create the FastAPI application exposing the manifest at ``artifact_path``."""

    app = FastAPI(title="Module Manifest Service", version="1.0.0")
    artifact = Path(artifact_path).expanduser().resolve()

    def get_registry() -> ModuleRegistry:
        # Reload per request so a regenerated artifact is picked up; plain def
        # keeps the file read off the event loop.
        return ModuleRegistry.from_artifact(artifact)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/categories", response_model=CategoryListResponse)
    async def list_categories(
        registry: ModuleRegistry = Depends(get_registry),
    ) -> CategoryListResponse:
        return CategoryListResponse(
            categories=[
                CategorySummary(name=name, modules=len(registry.modules(name)))
                for name in registry.categories()
            ]
        )

    @app.get("/categories/{name}", response_model=CategoryResponse)
    async def get_category(
        name: str,
        registry: ModuleRegistry = Depends(get_registry),
    ) -> CategoryResponse:
        if name not in registry:
            raise HTTPException(status_code=404, detail=f"Unknown category: {name}")
        return CategoryResponse(
            name=name,
            modules=[_module_model(module) for module in registry.modules(name)],
        )

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
    ) -> GenerateResponse:
        def _run() -> GenerationResult:
            generator = generator_factory(Path(payload.path))
            output = payload.output if payload.output is not None else artifact
            return generator.dump(payload.path, output)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            artifact_path=str(result.path),
            categories=len(result.index),
            modules=result.module_count,
        )

    @app.exception_handler(ArtifactError)
    async def artifact_error_handler(_: Any, exc: ArtifactError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(DiscoveryError)
    async def discovery_error_handler(_: Any, exc: DiscoveryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ModManifestError)
    async def manifest_error_handler(_: Any, exc: ModManifestError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(
    artifact_path: Path | str = DEFAULT_OUTPUT,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(artifact_path)
    uvicorn.run(app, host=host, port=port)
