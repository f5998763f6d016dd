from typing import Any


# API Gateway proxy integration
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaResponse = dict[str, Any]
type RequestParams = dict[str, Any]

# Configuration document (AppConfig JSON or local YAML) and its per-function slice
type ConfigDocument = dict[str, Any]
type LambdaConfiguration = dict[str, Any]
type RedisConnectionParams = dict[str, Any]

# Edit form payload handed to the frontend
type FormData = dict[str, Any]

# (owner, bookmark hash), as stored in the keyword reverse index
type BookmarkRef = tuple[str, str]
