"""MakeAndCut: upload-and-cut API backed by a remote media store."""
