def fetch_all(query) -> list:
    """Every record matching ``query``.

    Protean hands results back one page at a time (100 records by default),
    so keep reading until the reported total is reached.
    """
    page = query.all()
    records = list(page.items)
    while page.items and len(records) < page.total:
        page = query.offset(len(records)).all()
        records.extend(page.items)
    return records
