# weather_glass/core/config.py
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env.example 里的占位值，等同于“未配置”
PLACEHOLDER_ACCESS_KEY = "PASTE_YOUR_WEATHERSTACK_KEY_HERE"


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # 当前环境：dev / test / prod
    env: str = Field("dev", validation_alias="ENV")

    # ==== Weatherstack 凭证 ====
    # 运行时变量优先；VITE_ 前缀的是前端构建期变量，作为兼容别名保留
    weatherstack_key: str | None = Field(
        default=None, validation_alias="WEATHERSTACK_KEY"
    )
    vite_weatherstack_key: str | None = Field(
        default=None, validation_alias="VITE_WEATHERSTACK_KEY"
    )

    weatherstack_base_url: str = Field(
        "https://api.weatherstack.com",
        validation_alias="WEATHERSTACK_BASE_URL",
    )

    # 单位制：m / f / s
    weatherstack_units: str = Field(
        "m",
        validation_alias=AliasChoices("WEATHERSTACK_UNITS", "VITE_WEATHERSTACK_UNITS"),
    )

    # 客户端请求层调用的代理地址
    weather_proxy_url: str = Field(
        "http://127.0.0.1:8000/api",
        validation_alias="WEATHER_PROXY_URL",
    )

    def resolve_access_key(self) -> str | None:
        """
        返回可用的 access key；未配置、空白或仍是占位值时返回 None
        """
        key = (self.weatherstack_key or self.vite_weatherstack_key or "").strip()
        if not key or key == PLACEHOLDER_ACCESS_KEY:
            return None
        return key


settings = Settings()
