def join_url(base: str, *segments: str) -> str:
    """
    join url or path segments with exactly one slash between them.

    leading slashes of the base and the scheme separator are preserved.
    """
    parts = [base.rstrip("/")]
    for segment in segments:
        segment = segment.strip("/")
        if segment:
            parts.append(segment)
    return "/".join(parts)
