PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
REPLACEMENT = "****"


def clean_profanity(body: str) -> str:
    """Replace whole space-separated profane words (any case) with ****.

    Words with attached punctuation ("Sharbert!") are left alone.
    """
    words = body.split(" ")
    return " ".join(REPLACEMENT if w.lower() in PROFANE_WORDS else w for w in words)
