class QRMenuError(Exception):
    """Base class for service-level errors."""


class CafeNotFound(QRMenuError):
    def __init__(self, cafe_id):
        super().__init__(f"Cafe {cafe_id} not found")
        self.cafe_id = cafe_id


class DeploymentNotGenerated(QRMenuError):
    def __init__(self, slug: str):
        super().__init__(f"Deployment files not generated yet for '{slug}'")
        self.slug = slug


class InvalidUpload(QRMenuError):
    pass
