import random
import string


class AffiliateCode:
    def _random_code(self, size: int) -> str:
        return ''.join(random.choices(string.ascii_uppercase + string.digits, k=size))

    def generate_code(self, taken: set[str], size: int = 8) -> str:
        while True:
            code = self._random_code(size)
            if code not in taken:
                return code
