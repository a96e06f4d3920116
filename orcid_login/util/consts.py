DEV = "dev"
PROD = "prod"
TEST = "test"

# strategies
ORCID = "orcid"
STRATEGY_PATH_PARAM = "strategy"

# session keys
SESSION_USER = "user"

# path segments under /login that are routes, not strategy keys
RESERVED_STRATEGY_KEYS = {"strategies"}
