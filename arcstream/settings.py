"""Global settings for arcstream.

These are read when they are needed, so you can simply set them on the
module before (or even after) creating a `Keystream`:

    import arcstream.settings
    arcstream.settings.STRICT = True
"""

# Reject key material which is longer than the requested key size
# instead of ignoring the extra bytes (with a warning).
STRICT = False
