"""
YAML serialization for resource payloads.

Payloads are decoded according to the kind carried by the address they were
read from, never by sniffing their content.
"""

from typing import Any, Dict, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from kafka_connector.address import ResourceAddress, ResourceKind, encode_address
from kafka_connector.common.exceptions import DeserializeError, InvalidAddressError, KindMismatchError
from kafka_connector.resources.models import KafkaAcl, KafkaQuota, KafkaResource, KafkaTopic

ModelT = TypeVar("ModelT", bound=BaseModel)

RESOURCE_MODELS: Dict[ResourceKind, Type[BaseModel]] = {
    ResourceKind.TOPIC: KafkaTopic,
    ResourceKind.ACL: KafkaAcl,
    ResourceKind.QUOTA: KafkaQuota,
}


def dump_model(model: BaseModel) -> bytes:
    """
    Render a model as block-style YAML in field declaration order.

    Args:
        model: Any pydantic model

    Returns:
        UTF-8 encoded YAML document
    """
    data = model.model_dump(mode="json")
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True).encode("utf-8")


def load_model(model_cls: Type[ModelT], data: Union[bytes, str], kind: str) -> ModelT:
    """
    Parse a YAML document into a model, rejecting unknown fields.

    Args:
        model_cls: Model class to validate against
        data: Raw payload
        kind: Human-readable kind name used in error messages

    Returns:
        Validated model instance

    Raises:
        DeserializeError: If the payload is not valid YAML or violates the schema
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
    except UnicodeDecodeError as e:
        raise DeserializeError(kind, f"payload is not valid UTF-8: {e}") from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise DeserializeError(
            kind,
            f"invalid YAML: {e}",
            line=mark.line + 1 if mark is not None else None,
            column=mark.column + 1 if mark is not None else None,
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DeserializeError(kind, f"expected a mapping at the top level, got {type(raw).__name__}")

    try:
        return model_cls.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        raise DeserializeError(kind, first["msg"], field=field) from e


def serialize(resource: KafkaResource) -> bytes:
    """Serialize a topic, ACL or quota to its canonical YAML form."""
    return dump_model(resource)


def deserialize(addr: ResourceAddress, data: Union[bytes, str]) -> KafkaResource:
    """
    Decode a payload into the resource type selected by the address kind.

    Args:
        addr: Address the payload belongs to
        data: Raw YAML payload

    Returns:
        KafkaTopic, KafkaAcl or KafkaQuota

    Raises:
        InvalidAddressError: If the address does not hold a reconciled resource
        DeserializeError: If the payload violates the schema
    """
    kind = addr.kind
    if kind is None:
        raise InvalidAddressError(encode_address(addr), "address does not hold a reconciled resource")
    return load_model(RESOURCE_MODELS[kind], data, kind.value)


def expect_kind(resource: Any, model_cls: Type[ModelT]) -> ModelT:
    """
    Narrow a decoded resource to a concrete model class.

    Raises:
        KindMismatchError: If the resource is of a different kind
    """
    if not isinstance(resource, model_cls):
        raise KindMismatchError(model_cls.__name__, type(resource).__name__)
    return resource
