from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional

from ..data.catalog import Catalog
from ..engine import PricingEngine
from ..errors import MetadataTooLargeError, UnknownCatalogItemError
from ..payments.metadata import fit_metadata
from .state import get_catalog

app = FastAPI(
    title="Checkout Pricing API",
    description="Order pricing and payment metadata for the book-printing checkout",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class QuoteRequest(BaseModel):
    """A checkout selection, referencing catalog items by id or slug."""
    package: Optional[str] = None
    addons: List[str] = []
    has_cover_design: Optional[bool] = None
    has_formatting: Optional[bool] = None
    book_size: Optional[str] = None
    paper_color: Optional[str] = None
    lamination: Optional[str] = None
    word_count: float = 0
    price_per_word: float = 0
    coupon_code: Optional[str] = None
    discount_amount: float = 0
    strategy: Optional[str] = None


def build_engine(req: QuoteRequest, catalog: Catalog) -> PricingEngine:
    """Create a fresh engine for one request and replay the selection into it."""
    engine = PricingEngine(strategy=req.strategy)

    package = catalog.get_package(req.package) if req.package else None
    offered = {addon.id: addon for addon in catalog.addons_for(package)}

    addons = []
    for key in req.addons:
        addon = catalog.get_addon(key)
        addons.append(offered.get(addon.id, addon))

    engine.set_selected_package(package)
    engine.set_selected_addons(addons)
    engine.set_has_cover_design(req.has_cover_design)
    engine.set_has_formatting(req.has_formatting)
    engine.set_book_size(req.book_size)
    engine.set_paper_color(req.paper_color)
    engine.set_lamination(req.lamination)
    engine.apply_formatting_cost(req.word_count, req.price_per_word)
    if req.coupon_code or req.discount_amount:
        engine.apply_coupon(req.coupon_code, req.discount_amount)
    return engine


@app.get("/")
async def root():
    return {"status": "online", "message": "Checkout Pricing API Active"}


@app.get("/catalog/packages")
async def list_packages(catalog: Catalog = Depends(get_catalog)):
    return [package.to_dict() for package in catalog.packages]


@app.get("/catalog/addons")
async def list_addons(package: Optional[str] = None, catalog: Catalog = Depends(get_catalog)):
    """List addons; with a package, bundled addons come back auto-included."""
    try:
        selected = catalog.get_package(package) if package else None
    except UnknownCatalogItemError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return [addon.to_dict() for addon in catalog.addons_for(selected)]


@app.post("/quote")
async def quote(req: QuoteRequest, catalog: Catalog = Depends(get_catalog)):
    try:
        engine = build_engine(req, catalog)
    except UnknownCatalogItemError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "strategy": engine.strategy,
        "basePrice": engine.get_base_price(),
        "addonTotal": engine.get_addon_total(),
        "totalPrice": engine.get_total_price(),
        "addonBreakdown": [item.to_dict() for item in engine.get_addon_breakdown()],
        "configurationComplete": engine.is_configuration_complete(),
        "metadata": engine.to_payment_metadata().to_dict(),
    }


@app.post("/quote/metadata")
async def quote_metadata(req: QuoteRequest, limit: Optional[int] = None, catalog: Catalog = Depends(get_catalog)):
    """Payment metadata fitted to the provider's size limit."""
    try:
        engine = build_engine(req, catalog)
        return fit_metadata(engine.to_payment_metadata(), limit=limit)
    except UnknownCatalogItemError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MetadataTooLargeError as e:
        raise HTTPException(status_code=422, detail=str(e))
