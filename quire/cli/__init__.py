# Should be all-lower
QUIRE_ENTRYPOINT_NAME = "quire"
