#!/usr/bin/env python3
from typing import Any, Dict, List

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class StealthConfig:
    """Browser launch and fingerprint settings for the wp-admin session"""

    def __init__(self, locale: str = "en-US", timezone_id: str = "America/New_York"):
        self.locale = locale
        self.timezone_id = timezone_id

    def get_chrome_args(self) -> List[str]:
        return [
            '--disable-blink-features=AutomationControlled',
            '--disable-dev-shm-usage',
            '--no-sandbox',
            '--disable-setuid-sandbox',
            '--disable-web-security',
            '--disable-features=IsolateOrigins,site-per-process',
            '--start-maximized',
            '--window-size=1920,1080',
            '--user-agent=' + self.get_user_agent(),
        ]

    def get_user_agent(self) -> str:
        return USER_AGENT

    def get_context_args(self) -> Dict[str, Any]:
        return {
            "viewport": {"width": 1920, "height": 1080},
            "user_agent": self.get_user_agent(),
            "locale": self.locale,
            "timezone_id": self.timezone_id,
            "geolocation": {"latitude": 42.3601, "longitude": -71.0589},
            "permissions": ["geolocation"],
            "extra_http_headers": {
                "Accept-Language": f"{self.locale},en;q=0.9",
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,image/apng,*/*;q=0.8",
                "Cache-Control": "no-cache",
                "Pragma": "no-cache",
            },
            "color_scheme": "light",
            "bypass_csp": True,
            "java_script_enabled": True,
            "ignore_https_errors": True,
        }

    async def apply_to_context(self, context):
        await context.add_init_script(
            """
            Object.defineProperty(navigator, 'webdriver', { get: () => undefined });

            Object.defineProperty(navigator, 'plugins', {
                get: () => [
                    {name: 'Chrome PDF Plugin', filename: 'internal-pdf-viewer', description: 'Portable Document Format'},
                    {name: 'Chrome PDF Viewer', filename: 'mhjfbmdgcfjbbpaeojofohoefgiehjai', description: ''}
                ]
            });

            const originalQuery = window.navigator.permissions?.query;
            if (originalQuery) {
                window.navigator.permissions.query = (parameters) => (
                  parameters.name === 'notifications'
                    ? Promise.resolve({ state: Notification.permission })
                    : originalQuery(parameters)
                );
            }

            window.chrome = {
                runtime: {
                    connect: () => {},
                    sendMessage: () => {},
                    onMessage: { addListener: () => {} }
                }
            };

            Object.defineProperty(navigator, 'hardwareConcurrency', { get: () => 8 });
            Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });

            Object.defineProperty(screen, 'width', { get: () => 1920 });
            Object.defineProperty(screen, 'height', { get: () => 1080 });
            Object.defineProperty(screen, 'availWidth', { get: () => 1920 });
            Object.defineProperty(screen, 'availHeight', { get: () => 1040 });
            Object.defineProperty(screen, 'colorDepth', { get: () => 24 });
            Object.defineProperty(screen, 'pixelDepth', { get: () => 24 });
            """
        )
