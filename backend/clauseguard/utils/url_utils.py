"""URL parsing utilities."""

import tldextract

# Bundled public-suffix snapshot only; never fetch the list over the network.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def get_domain(url: str) -> str:
    """
    Return the registered (root) domain from a URL, stripping subdomains.
    Examples:
        https://example.com/path          -> example.com
        https://policies.google.com/terms -> google.com
        https://sub.example.co.uk:443/    -> example.co.uk
        localhost                         -> localhost
    """
    ext = _extract(url.strip())
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return ext.domain or ""
