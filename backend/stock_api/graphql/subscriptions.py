# graphql/subscriptions.py

import strawberry
from typing import AsyncGenerator
from strawberry.types import Info

from .queries import PriceTick


@strawberry.type
class Subscription:
    @strawberry.subscription
    async def price_updates(self, info: Info, symbol: str) -> AsyncGenerator[PriceTick, None]:
        broadcaster = info.context["request"].app.state.broadcaster

        async for point in broadcaster.stream(symbol.upper()):
            yield PriceTick.from_model(point)
