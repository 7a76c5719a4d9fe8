import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from x12_models import UNIDENTIFIED_TRANSACTION

logger = logging.getLogger(__name__)

# X12 transaction set identifier codes (ST01) and their names.
X12_TRANSACTION_SETS: Dict[str, str] = {
    "100": "Insurance Plan Description",
    "101": "Name and Address Lists",
    "104": "Air Shipment Information",
    "110": "Air Freight Details and Invoice",
    "120": "Vehicle Shipping Order",
    "140": "Product Registration",
    "141": "Product Service Claim Response",
    "142": "Product Service Claim",
    "143": "Product Service Notification",
    "150": "Tax Rate Notification",
    "180": "Return Merchandise Authorization and Notification",
    "204": "Motor Carrier Load Tender",
    "210": "Motor Carrier Freight Details and Invoice",
    "211": "Motor Carrier Bill of Lading",
    "214": "Transportation Carrier Shipment Status Message",
    "240": "Motor Carrier Package Status",
    "270": "Eligibility, Coverage or Benefit Inquiry",
    "271": "Eligibility, Coverage or Benefit Information",
    "274": "Healthcare Provider Information",
    "275": "Patient Information",
    "276": "Health Care Claim Status Request",
    "277": "Health Care Claim Status Notification",
    "278": "Health Care Services Review Information",
    "300": "Reservation (Booking Request) (Ocean)",
    "301": "Confirmation (Ocean)",
    "310": "Freight Receipt and Invoice (Ocean)",
    "315": "Status Details (Ocean)",
    "322": "Terminal Operations and Intermodal Ramp Activity",
    "404": "Rail Carrier Shipment Information",
    "410": "Rail Carrier Freight Details and Invoice",
    "753": "Request for Routing Instructions",
    "754": "Routing Instructions",
    "810": "Invoice",
    "811": "Consolidated Service Invoice/Statement",
    "812": "Credit/Debit Adjustment",
    "820": "Payment Order/Remittance Advice",
    "824": "Application Advice",
    "830": "Planning Schedule with Release Capability",
    "832": "Price/Sales Catalog",
    "834": "Benefit Enrollment and Maintenance",
    "835": "Health Care Claim Payment/Advice",
    "837": "Health Care Claim",
    "840": "Request for Quotation",
    "843": "Response to Request for Quotation",
    "846": "Inventory Inquiry/Advice",
    "850": "Purchase Order",
    "852": "Product Activity Data",
    "855": "Purchase Order Acknowledgment",
    "856": "Ship Notice/Manifest",
    "857": "Shipment and Billing Notice",
    "860": "Purchase Order Change Request - Buyer Initiated",
    "861": "Receiving Advice/Acceptance Certificate",
    "862": "Shipping Schedule",
    "864": "Text Message",
    "865": "Purchase Order Change Acknowledgment/Request - Seller Initiated",
    "866": "Production Sequence",
    "867": "Product Transfer and Resale Report",
    "869": "Order Status Inquiry",
    "870": "Order Status Report",
    "875": "Grocery Products Purchase Order",
    "880": "Grocery Products Invoice",
    "888": "Item Maintenance",
    "940": "Warehouse Shipping Order",
    "943": "Warehouse Stock Transfer Shipment Advice",
    "944": "Warehouse Stock Transfer Receipt Advice",
    "945": "Warehouse Shipping Advice",
    "947": "Warehouse Inventory Adjustment Advice",
    "990": "Response to a Load Tender",
    "996": "File Transfer",
    "997": "Functional Acknowledgment",
    "999": "Implementation Acknowledgment",
}


class TransactionSetLookup:
    """
    Read-only mapping from transaction set identifier code to a human-readable name.

    Instances are callable, so one can be passed anywhere a
    `Callable[[str], str]` lookup is accepted. Unknown codes resolve to
    "unidentified" rather than failing.
    """

    _default: Optional['TransactionSetLookup'] = None

    def __init__(self, names: Mapping[str, str]):
        self._names = MappingProxyType(dict(names))

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> 'TransactionSetLookup':
        """Load a `{"code": "name"}` JSON table from disk."""
        path = Path(path)
        with open(path, 'r') as f:
            names = json.load(f)
        if not isinstance(names, dict):
            raise ValueError(f"Transaction set table {path} must be a JSON object of code to name")
        logger.info(f"Loaded {len(names)} transaction set names from: {path}")
        return cls({str(code): str(name) for code, name in names.items()})

    @classmethod
    def default(cls) -> 'TransactionSetLookup':
        """The process-wide lookup built from the bundled X12 table."""
        if cls._default is None:
            cls._default = cls(X12_TRANSACTION_SETS)
        return cls._default

    @property
    def names(self) -> Mapping[str, str]:
        return self._names

    def lookup(self, code: str) -> str:
        return self._names.get(code.strip(), UNIDENTIFIED_TRANSACTION)

    def __call__(self, code: str) -> str:
        return self.lookup(code)

    def __contains__(self, code: object) -> bool:
        return code in self._names

    def __len__(self) -> int:
        return len(self._names)


def lookup_transaction_name(code: str) -> str:
    """Resolve a transaction set code against the bundled table."""
    return TransactionSetLookup.default().lookup(code)
