"""全局常量"""

# 版本信息
VERSION = "1.2.0"
APP_NAME = "WeChat Mini-Program Linker"

# 平台路径标识
APP_DIR_NAME = "WechatLinker"
APP_AUTHOR = "WechatLinker"

# 微信开放接口
WECHAT_API_BASE_URL = "https://api.weixin.qq.com"
WECHAT_API_DOMAIN = "api.weixin.qq.com"
STABLE_TOKEN_PATH = "/cgi-bin/stable_token"
GENERATE_URLLINK_PATH = "/wxa/generate_urllink"

# access_token 默认有效期（秒），接口未返回 expires_in 时使用
DEFAULT_TOKEN_EXPIRES_IN = 7200
# 剩余有效期小于该值时视为过期，提前刷新
TOKEN_REFRESH_MARGIN = 60

# 表示 access_token 失效的错误码
TOKEN_INVALID_ERRCODES = frozenset({40001, 40014, 42001})

# 默认配置
DEFAULT_TIMEOUT = 15  # 秒
DEFAULT_MAX_ERROR_RECORDS = 100

# 日志文件轮转
LOG_ROTATION = "10 MB"
LOG_RETENTION = "30 days"

# 文件名
SETTINGS_FILE_NAME = "settings.json"
TOKEN_CACHE_FILE_NAME = "token_cache.json"
ERROR_LOG_FILE_NAME = "errors.json"
LOG_FILE_NAME = "app.log"
REPORT_FILE_PREFIX = "error_report_"
