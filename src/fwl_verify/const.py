ERRORS = {
  "E_LAYOUT_MISSING": "Descriptor file missing",
  "E_MALFORMED": "Descriptor structure truncated or malformed",
  "E_CHECKSUM_NOT_FOUND": "Seed checksum not found within scan window",
}
