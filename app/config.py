from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    alchemy_eth_api_key: str = ""
    alchemy_polygon_api_key: str = ""
    alchemy_arbitrum_api_key: str = ""
    price_api_url: str = "https://api.coingecko.com/api/v3/simple/price"
    rpc_timeout: float = 10.0
    price_timeout: float = 5.0
    cache_ttl: float = 60.0
    rate_limit_cooldown: float = 300.0
    fetch_limit: int = 10
    fetch_timeout: float = 30.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
