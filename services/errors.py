class PlantPalError(Exception):
    """ルーターで HTTPException に変換するドメイン例外の基底"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlantPalError):
    """必須項目の不足・不正な値（400）"""


class NotFoundError(PlantPalError):
    """存在しない ID（404）"""


class DuplicateAccountError(ValidationError):
    pass


class InvalidCredentialsError(ValidationError):
    pass


class AIServiceError(PlantPalError):
    """AI プロバイダの障害・キー未設定・不正な出力（500）"""
