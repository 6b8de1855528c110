"""Table test data

Small record sets and factory functions for the export tests. Each factory builds
a fresh Table because tables collect directives in place."""

from TableEngine import Table, cells_column_labels, cells_title

# ===== Raw records =====

# One row, one column: the HTML round-trip case
SINGLE_CELL_ROWS = [{"col": "x"}]

# A text column next to a numeric one, in a single group
MIXED_ROWS = [{"name": "a", "grp": "g", "v": 1}, {"name": "b", "grp": "g", "v": 3}]

# Sales by region, grouped by quarter
SALES_ROWS = [
    {"region": "North", "quarter": "Q1", "units": 120, "revenue": 1534.5},
    {"region": "South", "quarter": "Q1", "units": 95, "revenue": 1210.0},
    {"region": "North", "quarter": "Q2", "units": 150, "revenue": 1988.25},
    {"region": "South", "quarter": "Q2", "units": None, "revenue": 1402.75},
]

# Text that needs escaping in every output format
SPECIAL_CHAR_ROWS = [
    {"item": "R&D <lab>", "share": "50%", "note": "{braces} \\ back"},
    {"item": "Café", "share": "25%", "note": "naïve_$"},
]

# ===== Sentinels used to check fragment order =====

SENTINEL_TITLE = "SentinelTitle"
SENTINEL_SUBTITLE = "SentinelSubtitle"
SENTINEL_LABEL = "SentinelLabel"
SENTINEL_CELL = "SentinelCell"
SENTINEL_FOOTNOTE = "SentinelFootnote"
SENTINEL_SOURCE = "SentinelSource"


def single_cell_table() -> Table:
    return Table(SINGLE_CELL_ROWS, id="single")


def sales_table() -> Table:
    """Grouped table with a stub, number formats, footnotes and a source note"""
    return (
        Table(SALES_ROWS, rowname_col="region", groupname_col="quarter", id="sales")
        .tab_header("Regional sales", subtitle="First half")
        .tab_stubhead("Region")
        .cols_label(units="Units", revenue="Revenue")
        .fmt_number("revenue", decimals=1)
        .sub_missing("units", missing_text="n/a")
        .tab_footnote("Excludes returns", cells_column_labels("revenue"))
        .tab_source_note("Source: internal ledger")
    )


def summary_table() -> Table:
    return sales_table().summary_rows(
        groups=True,
        columns=["units", "revenue"],
        fns=["sum", "mean"],
    )


def grand_summary_table() -> Table:
    return sales_table().grand_summary_rows(columns="units", fns={"Total": "sum"})


def mixed_summary_table() -> Table:
    """Text and numeric columns summarized with the default directive"""
    return Table(MIXED_ROWS, groupname_col="grp", id="mixed").summary_rows()


def sentinel_table() -> Table:
    """Every section populated with a unique marker"""
    return (
        Table([{"a": SENTINEL_CELL}], id="sentinel")
        .tab_header(SENTINEL_TITLE, subtitle=SENTINEL_SUBTITLE)
        .cols_label(a=SENTINEL_LABEL)
        .tab_footnote(SENTINEL_FOOTNOTE, cells_title("title"))
        .tab_source_note(SENTINEL_SOURCE)
    )


def special_char_table() -> Table:
    return Table(SPECIAL_CHAR_ROWS, id="special").tab_header("Costs & {margins}")


# JSON payload accepted by Table.from_dict and the export script
SALES_PAYLOAD = {
    "id": "payload",
    "data": SALES_ROWS,
    "rowname_col": "region",
    "groupname_col": "quarter",
    "heading": {"title": "Regional sales", "subtitle": "First half"},
    "column_labels": {"units": "Units"},
    "number_formats": [{"columns": ["revenue"], "decimals": 1}],
    "footnotes": [{"footnote": "Excludes returns", "columns": ["revenue"]}],
    "source_notes": ["Source: internal ledger"],
    "summary_rows": [{"fns": ["sum"], "columns": ["units"], "decimals": 0}],
}
