"""
Static logical-to-physical column map for CAD cut-list exports.

Each table lists every logical alias the pipeline may ask for; several
aliases resolve to the same physical column (``Id`` and ``ProductId`` both
name ``LinkID`` in PRODUCTS).  Dimensions are millimetres.
"""

from __future__ import annotations

from shopfloor_ingestion.domain.types import TableType

COLUMN_MAP: dict[TableType, dict[str, str]] = {
    TableType.PRODUCTS: {
        "Id": "LinkID",
        "ProductId": "LinkID",
        "WorkOrderId": "LinkIDWorkOrder",
        "ItemNumber": "ItemNumber",
        "Name": "Name",
        "ProductName": "Name",
        "WorkOrderName": "WorkOrderName",
        "Width": "Width",
        "Height": "Height",
        "Depth": "Depth",
        "Length": "Height",  # Exports store product length as Height
        "Quantity": "Quantity",
        "InternalId": "ID",
    },
    TableType.SUBASSEMBLIES: {
        "Id": "LinkID",
        "SubassemblyId": "LinkID",
        "ProductId": "LinkIDParentProduct",
        "ParentProductId": "LinkIDParentProduct",
        "ParentSubassemblyId": "LinkIDParentSubassembly",
        "WorkOrderId": "LinkIDWorkOrder",
        "Name": "Name",
        "SubassemblyName": "Name",
        "Width": "Width",
        "Height": "Height",
        "Length": "Height",
        "Quantity": "Quantity",
        "InternalId": "ID",
    },
    TableType.PARTS: {
        "Id": "LinkID",
        "PartId": "LinkID",
        "ProductId": "LinkIDProduct",
        "SubassemblyId": "LinkIDSubAssembly",
        "WorkOrderId": "LinkIDWorkOrder",
        "MaterialId": "LinkIDMaterial",
        "Name": "Name",
        "PartName": "Name",
        "Material": "MaterialName",
        "MaterialName": "MaterialName",
        "Thickness": "MaterialThickness",
        "MaterialThickness": "MaterialThickness",
        "Width": "Width",
        "Length": "Length",
        "Height": "Length",
        "CutPartWidth": "CutPartWidth",
        "CutPartLength": "CutPartLength",
        "EdgeBandingTop": "EdgeNameTop",
        "EdgeBandingBottom": "EdgeNameBottom",
        "EdgeBandingLeft": "EdgeNameLeft",
        "EdgeBandingRight": "EdgeNameRight",
        "EdgeNameTop": "EdgeNameTop",
        "EdgeNameBottom": "EdgeNameBottom",
        "EdgeNameLeft": "EdgeNameLeft",
        "EdgeNameRight": "EdgeNameRight",
        "FileName": "FileName",
        "Quantity": "Quantity",
        "Index": "Index",
        "InternalId": "ID",
    },
    TableType.HARDWARE: {
        "Id": "LinkID",
        "HardwareId": "LinkID",
        "ProductId": "LinkIDProduct",
        "SubassemblyId": "LinkIDSubAssembly",
        "WorkOrderId": "LinkIDWorkOrder",
        "MaterialId": "LinkIDMaterial",
        "Name": "Name",
        "HardwareName": "Name",
        "Quantity": "Quantity",
        "Index": "Index",
        "InternalId": "ID",
    },
    TableType.PLACEDSHEETS: {
        "Id": "LinkID",
        "SheetId": "LinkID",
        "WorkOrderId": "LinkIDWorkOrder",
        "Name": "Name",
        "FileName": "FileName",
        "BarCode": "BarCode",
        "Material": "Name",  # Placed sheets are named after their material
        "Width": "Width",
        "Length": "Length",
        "Thickness": "Thickness",
        "Quantity": "Quantity",
        "Index": "Index",
        "InternalId": "ID",
    },
    TableType.OPTIMIZATIONRESULTS: {
        "Id": "LinkID",
        "PartId": "LinkIDPart",
        "SheetId": "LinkIDSheet",
        "WorkOrderId": "LinkIDWorkOrder",
        "OptimizedQuantity": "OptimizedQuantity",
        "Width": "Width",
        "Length": "Length",
        "Index": "Index",
        "InternalId": "ID",
    },
}

# Edge-banding logical fields in side-code order
EDGE_FIELDS: tuple[tuple[str, str], ...] = (
    ("Top", "EdgeNameTop"),
    ("Bottom", "EdgeNameBottom"),
    ("Left", "EdgeNameLeft"),
    ("Right", "EdgeNameRight"),
)
