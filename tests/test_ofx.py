import textwrap

from statement_import.ofx import UNKNOWN_DESCRIPTION, map_ofx_type, parse_ofx
from statement_import.models import ParsedTransaction


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


SGML_STATEMENT = _dedent(
    """
    OFXHEADER:100
    DATA:OFXSGML
    VERSION:102

    <OFX>
    <BANKMSGSRSV1><STMTTRNRS><STMTRS>
    <CURDEF>USD
    <BANKTRANLIST>
    <DTSTART>20240101
    <STMTTRN>
    <TRNTYPE>POS
    <DTPOSTED>20240115120000
    <TRNAMT>-50.00
    <FITID>1001
    <NAME>WALMART
    <MEMO>PURCHASE
    </STMTTRN>
    <STMTTRN>
    <TRNTYPE>DIRECTDEP
    <DTPOSTED>20240131
    <TRNAMT>2500.00
    <FITID>1002
    <NAME>ACME PAYROLL
    </STMTTRN>
    </BANKTRANLIST>
    <LEDGERBAL><BALAMT>1234.56<DTASOF>20240131</LEDGERBAL>
    </STMTRS></STMTTRNRS></BANKMSGSRSV1>
    </OFX>
    """
)


def test_extracts_sgml_blocks():
    rows = parse_ofx(SGML_STATEMENT)
    assert rows == [
        ParsedTransaction(
            date="2024-01-15",
            description="WALMART",
            amount_minor_units=5000,
            is_expense=True,
            category="personal",
            memo="PURCHASE",
        ),
        ParsedTransaction(
            date="2024-01-31",
            description="ACME PAYROLL",
            amount_minor_units=250000,
            is_expense=False,
            category="savings",
        ),
    ]


def test_xml_closing_tags_and_lowercase():
    content = (
        "<ofx><stmttrn><trntype>FEE</trntype><dtposted>20240201</dtposted>"
        "<trnamt>-2.50</trnamt><name>Monthly fee</name></stmttrn></ofx>"
    )
    rows = parse_ofx(content)
    assert [(r.date, r.description, r.amount_minor_units, r.category) for r in rows] == [
        ("2024-02-01", "Monthly fee", 250, "other")
    ]


def test_memo_stands_in_for_missing_name():
    content = _dedent(
        """
        <STMTTRN>
        <DTPOSTED>20240115
        <TRNAMT>-9.99
        <MEMO>SPOTIFY
        </STMTTRN>
        <STMTTRN>
        <DTPOSTED>20240116
        <TRNAMT>-1.00
        </STMTTRN>
        """
    )
    first, second = parse_ofx(content)
    assert (first.description, first.memo, first.category) == ("SPOTIFY", None, None)
    assert second.description == UNKNOWN_DESCRIPTION


def test_memo_equal_to_name_is_dropped():
    content = "<STMTTRN><DTPOSTED>20240115<TRNAMT>-1<NAME>SHOP<MEMO>SHOP</STMTTRN>"
    (row,) = parse_ofx(content)
    assert row.memo is None


def test_incomplete_blocks_are_dropped():
    content = _dedent(
        """
        <STMTTRN>
        <TRNAMT>-1.00
        <NAME>No date
        </STMTTRN>
        <STMTTRN>
        <DTPOSTED>garbage
        <TRNAMT>-1.00
        </STMTTRN>
        <STMTTRN>
        <DTPOSTED>20240115
        <TRNAMT>lots
        </STMTTRN>
        <STMTTRN>
        <DTPOSTED>20240115
        <TRNAMT>-1.00
        <NAME>Kept
        </STMTTRN>
        <STMTTRN>
        <DTPOSTED>20240116
        <NAME>Unterminated block
        """
    )
    assert [r.description for r in parse_ofx(content)] == ["Kept"]
    assert parse_ofx("") == []


def test_map_ofx_type():
    assert map_ofx_type("FEE") == "other"
    assert map_ofx_type("srvchg") == "other"
    assert map_ofx_type("INT") == "savings"
    assert map_ofx_type("DIV") == "savings"
    assert map_ofx_type("DEP") == "savings"
    assert map_ofx_type("ATM") == "personal"
    assert map_ofx_type("PAYMENT") == "debt_payment"
    assert map_ofx_type("XFER") == "other"
