"""
异常定义
"""


class CheckSSLError(Exception):
    """checkssl 所有异常的基类"""


class DateParseError(CheckSSLError, ValueError):
    """日期字符串无法解析"""

    def __init__(self, message: str, raw=None):
        super().__init__(message)
        self.raw = raw


class MalformedFormatError(DateParseError):
    """分隔符不被识别或组成部分不是三段"""


class NonNumericComponentError(DateParseError):
    """日期组成部分不是整数"""


class OutOfRangeError(DateParseError):
    """日、月、年超出允许范围"""


class InvalidInputError(CheckSSLError, TypeError):
    """输入集合本身的结构不正确"""


class CertificateCheckError(CheckSSLError):
    """获取或处理证书失败"""

    def __init__(self, message: str, domain=None):
        super().__init__(message)
        self.domain = domain


class CertificateExpiredError(CertificateCheckError):
    """证书已经过期"""
