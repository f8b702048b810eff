import logging
import os
import uuid
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import ClientError

from db.store import ReportStore, StorageError, sort_newest_first

log = logging.getLogger(__name__)

REGION = os.getenv("AWS_REGION", "eu-north-1")
REPORTS_TABLE = os.getenv("REPORTS_TABLE", "CallCenterReports")


def _client_error_message(e: ClientError) -> str:
    return e.response.get("Error", {}).get("Message", str(e))


class DynamoReportStore(ReportStore):
    """
    Reports table with PK: id (string). Dates and times are stored as ISO
    strings, absent optional fields are simply not written.
    """

    def __init__(self, table=None, *, region: str = REGION, table_name: str = REPORTS_TABLE):
        if table is None:
            dynamodb = boto3.resource("dynamodb", region_name=region)
            table = dynamodb.Table(table_name)
        self.table = table

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        item = {k: v for k, v in record.items() if v is not None}
        item["id"] = str(uuid.uuid4())
        item["status"] = "pending"
        try:
            self.table.put_item(
                Item=item,
                ConditionExpression=Attr("id").not_exists(),
            )
        except ClientError as e:
            log.error("put_item failed: %s", e)
            raise StorageError(_client_error_message(e)) from e
        return item

    def select(self, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Scan the table (auto-paginating) and sort client-side; the table is
        small and has no date index.
        """
        kwargs: Dict[str, Any] = {}
        condition = None
        for name, value in (filters or {}).items():
            clause = Attr(name).eq(value)
            condition = clause if condition is None else condition & clause
        if condition is not None:
            kwargs["FilterExpression"] = condition

        items: List[Dict[str, Any]] = []
        lek: Optional[Dict[str, Any]] = None
        try:
            while True:
                if lek:
                    kwargs["ExclusiveStartKey"] = lek
                resp = self.table.scan(**kwargs)
                items.extend(resp.get("Items", []))
                lek = resp.get("LastEvaluatedKey")
                if not lek:
                    break
        except ClientError as e:
            log.error("scan failed: %s", e)
            raise StorageError(_client_error_message(e)) from e
        return sort_newest_first(items)

    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        names = {f"#f{i}": name for i, name in enumerate(fields)}
        values = {f":v{i}": value for i, value in enumerate(fields.values())}
        expr = ", ".join(f"#f{i} = :v{i}" for i in range(len(fields)))
        try:
            self.table.update_item(
                Key={"id": record_id},
                UpdateExpression=f"SET {expr}",
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise StorageError(f"Report not found: {record_id}") from e
            log.error("update_item failed for %s: %s", record_id, e)
            raise StorageError(_client_error_message(e)) from e
