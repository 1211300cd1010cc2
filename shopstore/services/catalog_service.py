"""
Catalog service - product creation workflow.

Orchestrates validation, the SKU uniqueness check, the optional image
upload and the repository insert. Every recoverable failure comes back
as field errors on the result instead of an exception.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from ..domain.entities import Product
from ..domain.exceptions import DuplicateSkuError, UploadError
from ..logging_config import get_logger
from ..repositories.product_repository import ProductRepository
from ..storage.image_storage import ImageStorage
from ..validators import validate_product

logger = get_logger(__name__)

SKU_EXISTS_MESSAGE = "SKU already exists"
UPLOAD_FAILED_MESSAGE = "Failed to upload image."


@dataclass(frozen=True)
class CreateProductResult:
    """Outcome of a create request: the stored product or field errors."""

    product: Optional[Product] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Check if the product was stored."""
        return self.product is not None


class CatalogService:
    """
    Product creation use case.

    The SKU check runs before any upload so a duplicate never leaves an
    orphaned image behind. The repository repeats the check atomically
    at insert time, which covers a concurrent add slipping in between.
    """

    def __init__(
        self,
        repository: ProductRepository,
        image_storage: Optional[ImageStorage] = None,
    ):
        """
        Initialize the service.

        Args:
            repository: Product repository
            image_storage: Blob storage for image attachments (optional)
        """
        self.repository = repository
        self.image_storage = image_storage

    async def create_product(self, form: Mapping[str, Any]) -> CreateProductResult:
        """
        Validate and store a new product.

        Args:
            form: Raw product form values

        Returns:
            CreateProductResult with the stored product or field errors
        """
        validation = validate_product(form)
        if not validation.ok:
            logger.info("product_form_rejected", fields=sorted(validation.errors))
            return CreateProductResult(errors=validation.errors)

        draft = validation.unwrap()

        if self.repository.get_by_sku(draft.sku) is not None:
            logger.info("product_sku_taken", sku=draft.sku)
            return CreateProductResult(errors={"sku": SKU_EXISTS_MESSAGE})

        image_url = draft.image
        if draft.image_file is not None:
            if self.image_storage is None:
                logger.warning("image_storage_not_configured", sku=draft.sku)
                return CreateProductResult(errors={"image_file": UPLOAD_FAILED_MESSAGE})

            attachment = draft.image_file
            try:
                image_url = await self.image_storage.upload(
                    attachment.data, attachment.filename, attachment.content_type
                )
            except UploadError as e:
                logger.warning("product_image_upload_failed", sku=draft.sku, error=e.message)
                return CreateProductResult(errors={"image_file": UPLOAD_FAILED_MESSAGE})

        try:
            product = self.repository.add(replace(draft, image=image_url, image_file=None))
        except DuplicateSkuError:
            if draft.image_file is not None:
                logger.warning("uploaded_image_orphaned", sku=draft.sku, url=image_url)
            return CreateProductResult(errors={"sku": SKU_EXISTS_MESSAGE})

        return CreateProductResult(product=product)
