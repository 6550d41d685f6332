from urllib.parse import urlparse


def resolve_url(raw: str, base_url: str) -> str:
    """Return *raw* as an absolute URL anchored at the host of *base_url*.

    Relative paths (``img/a.png``) are joined to the host root, not to the
    directory of the base document, and ``..`` segments are left as-is.
    An empty *raw* stays empty so callers can treat it as "absent".
    """
    if not raw:
        return ""

    if raw.startswith(("http://", "https://")):
        return raw

    # Protocol-relative
    if raw.startswith("//"):
        return "https:" + raw

    base = urlparse(base_url)
    origin = f"{base.scheme}://{base.netloc}"

    if raw.startswith("/"):
        return origin + raw

    return f"{origin}/{raw}"
