"""
Dataset and distribution mappings (``dcat:Dataset``, ``dcat:Distribution``).
"""

import logging

from ....constants import ExportDefaults
from ....shared.models import DataProduct, Distribution, EntityType, Version, first
from ..graph_builder import MappingContext, Subject
from ..namespaces import ADMS, DCAT, DCT, DQV, OA, OWL
from .base import MappingStrategy


logger = logging.getLogger(__name__)


def split_keywords(keywords):
    """Split a comma separated keyword string, dropping empty items."""
    if not keywords:
        return []
    return [k.strip() for k in keywords.split(ExportDefaults.KEYWORD_SEPARATOR) if k.strip()]


def _data_product(entity: DataProduct, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_literals(subject, DCT["title"], entity.title)
    b.add_literal(subject, DCT.identifier, entity.uid)
    ctx.link_all(subject, ADMS.identifier, entity.identifier, EntityType.IDENTIFIER)
    b.add_literals(subject, DCT.description, entity.description)

    b.add_uri_literal(subject, DCT.accrualPeriodicity, entity.accrual_periodicity)
    b.add_date(subject, DCT.created, entity.created)
    b.add_date(subject, DCT.issued, entity.issued)
    b.add_date(subject, DCT.modified, entity.modified)
    b.add_literal(subject, OWL.versionInfo, entity.version_info)
    b.add_uri_literal(subject, DCT.type, entity.type)

    # dct:spatial and dct:temporal take a single value
    ctx.link(subject, DCT.spatial, first(entity.spatial_extent), EntityType.LOCATION)
    ctx.link(subject, DCT.temporal, first(entity.temporal_extent), EntityType.PERIOD_OF_TIME)

    ctx.link_all(subject, DCAT.theme, entity.category, EntityType.CATEGORY)
    b.add_literals(subject, DCAT.keyword, split_keywords(entity.keywords))
    ctx.link_all(subject, DCAT.contactPoint, entity.contact_point, EntityType.CONTACT_POINT)
    ctx.link_all(subject, DCAT.distribution, entity.distribution, EntityType.DISTRIBUTION)
    ctx.link_all(subject, DCT.publisher, entity.publisher, EntityType.ORGANIZATION)

    if entity.quality_assurance:
        annotation = b.blank_node()
        b.add_type(annotation, OA.Annotation)
        b.add_uri_literal(annotation, OA.hasBody, entity.quality_assurance)
        b.add_reference(subject, DQV.hasQualityAnnotation, annotation)


def _distribution(entity: Distribution, subject: Subject, ctx: MappingContext) -> None:
    b = ctx.builder

    b.add_uri_literals(subject, DCAT.accessURL, entity.access_url)
    b.add_literal(subject, DCT.identifier, entity.uid)
    b.add_strings(subject, DCT.description, entity.description)
    b.add_uri_literal(subject, DCT["format"], entity.format)
    b.add_uri_literal(subject, DCT.license, entity.licence)

    for ref in entity.access_service:
        ctx.link_or_uri(subject, DCAT.accessService, ref, EntityType.WEB_SERVICE)

    if entity.byte_size:
        try:
            b.add_int(subject, DCAT.byteSize, int(str(entity.byte_size).strip()))
        except ValueError:
            logger.warning(f"Ignoring invalid byteSize '{entity.byte_size}' of distribution {entity.uid}")

    b.add_uri_literals(subject, DCAT.downloadURL, entity.download_url)
    b.add_datetime(subject, DCT.issued, entity.issued, utc=False)
    b.add_uri_literal(subject, DCAT.mediaType, entity.media_type)
    b.add_datetime(subject, DCT.modified, entity.modified, utc=False)
    b.add_strings(subject, DCT["title"], entity.title)


DATA_PRODUCT = MappingStrategy(
    entity_type=EntityType.DATA_PRODUCT,
    rdf_class=DCAT.Dataset,
    v1=_data_product,
    required={Version.V1: ("title", "description")},
)

DISTRIBUTION = MappingStrategy(
    entity_type=EntityType.DISTRIBUTION,
    rdf_class=DCAT.Distribution,
    v1=_distribution,
)

STRATEGIES = (DATA_PRODUCT, DISTRIBUTION)
