"""
Typed request payloads and response records.

These are typing aids only: the client sends payloads as given and
returns parsed JSON without validating its shape.

Reference: https://api.merit.ee/connecting-robots/reference-manual/
"""

from typing import List, Optional, TypedDict, Union


class Invoice(TypedDict, total=False):
    SIHId: str
    DepartmentCode: Optional[str]
    DepartmentName: Optional[str]
    ProjectCode: Optional[str]
    ProjectName: Optional[str]
    AccountingDoc: int
    BatchInfo: str
    InvoiceNo: str
    DocumentDate: str  # ISO 8601
    TransactionDate: str
    CustomerId: str
    CustomerName: str
    CustomerRegNo: Optional[str]
    HComment: Optional[str]
    FComment: str
    DueDate: str
    CurrencyCode: str
    CurrencyRate: float
    TaxAmount: float
    RoundingAmount: float
    TotalAmount: float
    ProfitAmount: float
    TotalSum: float
    UserName: str
    ReferenceNo: str
    PriceInclVat: bool
    VatRegNo: str
    PaidAmount: float
    EInvSent: bool
    EInvSentDate: str
    EmailSent: str
    EInvOperator: int
    OfferId: str
    OfferDocType: Optional[str]
    OfferNo: Optional[str]
    FileExists: bool
    PerSHId: str
    ContractNo: Optional[str]
    Paid: bool
    Contact: Optional[str]


class GetInvoicesPayload(TypedDict, total=False):
    PeriodStart: str
    PeriodEnd: str
    UnPaid: bool


class Customer(TypedDict, total=False):
    """
    Customer record.

    CustomerId is the customer GUID. When it matches an existing customer
    on invoice creation the other fields are ignored.
    """

    CustomerId: str
    Name: str
    RegNo: str
    NotTDCustomer: bool  # True for physical persons and foreign companies
    VatRegNo: str
    CurrencyCode: str
    PaymentDeadLine: int  # days
    OverDueCharge: float
    Address: str
    City: str
    County: str
    PostalCode: str
    CountryCode: str  # ISO 3166-1 alpha-2
    PhoneNo: str
    PhoneNo2: str
    HomePage: str
    Email: str
    SalesInvLang: str  # ET, EN, RU, FI, PL, SV
    RefNoBase: str
    EInvPaymId: str
    EInvOperator: int  # 1 none, 2 Omniva, 3 bank full, 4 bank limited
    BankAccount: str
    Contact: str
    ApixEinv: str


class CreateCustomerPayload(TypedDict, total=False):
    Name: str
    RegNo: str
    NotTDCustomer: bool
    VatRegNo: str
    CurrencyCode: str
    PaymentDeadLine: int
    OverDueCharge: float
    Address: str
    City: str
    County: str
    PostalCode: str
    CountryCode: str
    PhoneNo: str
    PhoneNo2: str
    HomePage: str
    Email: str
    SalesInvLang: str
    RefNoBase: str
    EInvPaymId: str
    EInvOperator: int
    BankAccount: str
    Contact: str
    ApixEinv: str


class CustomerRef(TypedDict):
    Id: str


class Item(TypedDict, total=False):
    Code: str
    Description: str  # truncated by the service past 150 characters
    Type: int  # 1 stock item, 2 service, 3 item
    UOMName: str
    DefLocationCode: str
    GTUCode: int  # Poland only, 1-13
    SalesAccCode: str
    PurchaseAccCode: str
    InventoryAccCode: str
    CostAccCode: str


class Dimension(TypedDict):
    DimId: int
    DimValueId: str
    DimCode: str


class InvoiceRow(TypedDict, total=False):
    Item: Item
    Quantity: float
    Price: float
    DiscountPct: float
    DiscountAmount: float
    TaxId: str  # from get_taxes()
    LocationCode: str
    DepartmentCode: str
    GLAccountCode: str
    Dimensions: List[Dimension]
    ItemCostAmount: float
    VatDate: str  # YYYYMMDD


class TaxAmount(TypedDict, total=False):
    TaxId: str
    Amount: float


class Payment(TypedDict):
    PaymentMethod: str
    PaidAmount: float
    PaymDate: str  # YYYYmmddHHii


class CreateInvoicePayload(TypedDict, total=False):
    """
    Sales invoice.

    AccountingDoc: 1 faktura, 2 rachunek, 3 paragon, 4 nodoc, 5 credit,
    6 prepinvoice, 7 finchrg, 8 deliverdoc, 9 grpinv.
    PolDocType (Poland only): 1 RO, 2 WEW, 3 FP, 4 OJPK.
    """

    Customer: Union[CustomerRef, CreateCustomerPayload]
    AccountingDoc: int
    ProcCodes: List[str]
    PolDocType: int
    DocDate: str
    DueDate: str
    TransactionDate: str
    InvoiceNo: str
    RefNo: str
    CurrencyCode: str
    DepartmentCode: str
    ProjectCode: str
    InvoiceRow: List[InvoiceRow]
    TaxAmount: List[TaxAmount]
    RoundingAmount: float
    TotalAmount: float  # without VAT
    Payment: Payment
    Hcomment: str
    Fcomment: str
    ContractNo: str
    PDF: str  # base64


class CreateInvoiceResult(TypedDict):
    InvoiceId: str
    InvoiceNo: str


class CreateCustomerResult(TypedDict):
    Id: str


class Tax(TypedDict):
    Id: str
    Code: str
    Name: str
    TaxPct: float
    NonActive: bool


class Bank(TypedDict):
    BankId: str
    Name: str
    IBANCode: str
    Description: str
    CurrencyCode: str
    AccountCode: str
