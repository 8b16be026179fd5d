from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Amadeus
    amadeus_client_id: str = ""
    amadeus_client_secret: str = ""
    amadeus_base_url: str = "https://test.api.amadeus.com"
    amadeus_currency: str = "INR"
    amadeus_timeout_seconds: float = 30.0
    amadeus_max_concurrency: int = 10  # concurrent provider requests
    token_safety_margin_seconds: int = 60

    # Pricing limits
    hotel_lookup_limit: int = 20  # ids per offers request (URL length)
    hotel_result_limit: int = 10
    hotel_min_rating: float = 3.0
    flight_result_limit: int = 10

    # Planner (LLM)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5-20250929"
    planner_temperature: float = 0.7
    planner_max_tokens: int = 4000
    recommendation_timeout_seconds: float = 120.0

    # Pexels — destination images
    pexels_api_key: str = ""
    pexels_base_url: str = "https://api.pexels.com"

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
