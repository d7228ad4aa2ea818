from dupsweep.core.models import HashAlgorithmName, EngineStrategy

HASH_ALG_ALIASES = {
    "crc32": HashAlgorithmName.CRC32,
    "md5": HashAlgorithmName.MD5,
    "sha1": HashAlgorithmName.SHA1,
    "xxh64": HashAlgorithmName.XXH64,
}

HASH_ALG_HELP_TEXT = (
    "Hashing algorithm used to compare file contents:\n"
    "  crc32 : CRC-32, 4-byte digest (default)\n"
    "  md5   : MD5, 16-byte digest\n"
    "  sha1  : SHA-1, 20-byte digest\n"
    "  xxh64 : xxHash64, 8-byte digest\n"
)

STRATEGY_ALIASES = {
    "size-first": EngineStrategy.SIZE_FIRST,
    "hash-first": EngineStrategy.HASH_FIRST,
}

STRATEGY_CHOICES = list(STRATEGY_ALIASES.keys())

STRATEGY_HELP_TEXT = "Duplicate detection strategy:\n" + "".join(
    f"  {name:<10} : {strategy.description}\n" for name, strategy in STRATEGY_ALIASES.items()
)

EPILOG_TEXT = """
Examples:
  Remove duplicates directly inside ~/Downloads
  %(prog)s -d ~/Downloads

  Scan two trees three levels deep, skip a cache directory
  %(prog)s -d ~/photos ~/backup --depth 3 -e ~/photos/.cache

  Only .jpg files of at least 1K, compared with MD5, without deleting anything
  %(prog)s -d ~/photos --depth 5 -s 1K -m '\\.jpg$' -h md5 --dry-run

  Glob-style masks are accepted too
  %(prog)s -d ~/docs -m '*.txt' '*.md'
"""
