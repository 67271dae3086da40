"""AWS DynamoDB record store.

One item per asset, keyed by ``id``:

    {"id": <asset id>, "status": "reserved" | "uploaded",
     "created_at": <iso>, "uploaded_at": <iso>}
"""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from assetbroker.storage.base import RecordStore
from assetbroker.storage.exceptions import ConditionFailedError, RecordStoreError

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class DynamoDBRecordStore(RecordStore):
    """DynamoDB-backed record store using single-key conditional writes."""

    def __init__(
        self,
        table_name: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 10.0,
    ):
        """Initialize the DynamoDB table handle.

        Args:
            table_name: Name of the DynamoDB table, hash key ``id`` (string)
            region: AWS region, None lets boto3 resolve it
            endpoint_url: Optional endpoint override (localstack, DynamoDB local)
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
        """
        if not table_name:
            raise ValueError("TABLE_NAME not configured")

        self.table_name = table_name
        # One attempt per call: transient failures surface to the caller
        cfg = Config(
            region_name=region,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"total_max_attempts": 1, "mode": "standard"},
        )
        kwargs: Dict[str, Any] = {"config": cfg}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        self.ddb = boto3.resource("dynamodb", **kwargs)
        self.table = self.ddb.Table(table_name)

    def get(self, key: str, consistent: bool = True) -> Optional[Dict[str, Any]]:
        try:
            resp = self.table.get_item(Key={"id": key}, ConsistentRead=consistent)
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "DynamoDB get_item failed",
                extra={"table": self.table_name, "key": key, "error": str(e)},
            )
            raise RecordStoreError(f"Failed to read record '{key}': {e}") from e

        item = resp.get("Item")
        if not item or "id" not in item:
            return None
        return dict(item)

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression="attribute_not_exists(id)",
            )
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise ConditionFailedError(f"Record '{item.get('id')}' already exists") from e
            logger.error(
                "DynamoDB put_item failed",
                extra={"table": self.table_name, "key": item.get("id"), "error": str(e)},
            )
            raise RecordStoreError(f"Failed to create record '{item.get('id')}': {e}") from e
        except BotoCoreError as e:
            raise RecordStoreError(f"Failed to create record '{item.get('id')}': {e}") from e

    def update_if_exists(self, key: str, attributes: Dict[str, Any]) -> None:
        if not attributes:
            raise ValueError("update_if_exists needs at least one attribute")

        sets = []
        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        for name, value in attributes.items():
            names[f"#{name}"] = name
            values[f":{name}"] = value
            sets.append(f"#{name} = :{name}")

        try:
            self.table.update_item(
                Key={"id": key},
                UpdateExpression="SET " + ", ".join(sets),
                ConditionExpression="attribute_exists(id)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except ClientError as e:
            if _error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise ConditionFailedError(f"Record '{key}' does not exist") from e
            logger.error(
                "DynamoDB update_item failed",
                extra={"table": self.table_name, "key": key, "error": str(e)},
            )
            raise RecordStoreError(f"Failed to update record '{key}': {e}") from e
        except BotoCoreError as e:
            raise RecordStoreError(f"Failed to update record '{key}': {e}") from e

    def get_backend_name(self) -> str:
        return "dynamodb"


def _error_code(error: ClientError) -> str:
    return (error.response.get("Error") or {}).get("Code", "")
