from __future__ import annotations

import asyncio
from decimal import Decimal

from food_order.auth import Session
from food_order.auth_modal import AuthModal
from food_order.checkout_modal import CheckoutModal
from food_order.customize_modal import CustomizeModal
from food_order.food_app import FoodOrderApp
from food_order.history_modal import HistoryModal
from food_order.models import UserRecord
from food_order.profile_modal import ProfileModal
from food_order.restaurant_modal import RestaurantModal


def signed_in(provider) -> None:
    provider.session = Session("access", "refresh", 9999999999, UserRecord("u-1", "ann@example.com", {}))


async def settle(app, pilot) -> None:
    await app.workers.wait_for_complete()
    await pilot.pause()


def test_search_customize_and_checkout(context):
    app = FoodOrderApp(context)

    async def run() -> None:
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert isinstance(app.screen, AuthModal)

            await pilot.press("ctrl+t", *"ann", "tab", *"pw", "enter")
            await pilot.pause()
            assert context.auth.is_authenticated
            assert not isinstance(app.screen, AuthModal)

            await pilot.press("s", *"margherita")
            await pilot.press("enter")
            await pilot.pause()
            assert isinstance(app.screen, CustomizeModal)

            # The last row adds the item to the cart.
            await pilot.press("plus", "k", "enter")
            await pilot.pause()
            assert len(context.cart.items) == 1
            line = context.cart.items[0]
            assert line.name == "Margherita Pizza"
            assert line.size == "Small"
            assert line.quantity == 2
            assert context.cart.get_cart_total() == Decimal("25.98")

            app.action_cancel_active_mode()
            await pilot.press("ctrl+s")
            await pilot.pause()
            assert isinstance(app.screen, CheckoutModal)

            await pilot.press("enter")
            await pilot.pause()
            assert app.screen.error == "Please enter a delivery address"

            await pilot.press(*"main", "enter")
            await pilot.pause()
            assert isinstance(app.screen, HistoryModal)
            assert context.cart.items == ()
            assert context.orders.current_order.delivery_address == "main"
            assert context.orders.current_order.total == Decimal("30.96")

    asyncio.run(run())


def test_sign_up_error_stays_on_form(context, provider):
    app = FoodOrderApp(context)

    async def run() -> None:
        async with app.run_test() as pilot:
            await settle(app, pilot)
            provider.fail_with = "User already registered"
            await pilot.press(*"ann", "tab", *"ann", "tab", *"pw", "enter")
            await pilot.pause()
            assert isinstance(app.screen, AuthModal)
            assert app.screen.error == "User already registered"
            assert not context.auth.is_authenticated

    asyncio.run(run())


def test_profile_address_prefills_checkout(context, provider):
    signed_in(provider)
    app = FoodOrderApp(context)

    async def run() -> None:
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert not isinstance(app.screen, AuthModal)

            # Rows: full name, phone, address 1, address 2, sign out.
            await pilot.press("p")
            await pilot.pause()
            await pilot.press("j", "j", "enter", *"home", "enter")
            await pilot.pause()
            assert isinstance(app.screen, ProfileModal)
            assert context.auth.user.user_metadata["address1"] == "home"
            await pilot.press("escape")
            await pilot.pause()

            await pilot.press("2")
            await pilot.pause()
            assert isinstance(app.screen, RestaurantModal)
            assert app.screen.restaurant.name == "Pizza Paradise"

            await pilot.press("enter")
            await pilot.pause()
            assert isinstance(app.screen, CustomizeModal)
            await pilot.press("k", "enter")
            await pilot.pause()
            assert [line.name for line in context.cart.items] == ["Margherita Pizza"]

            await pilot.press("ctrl+s")
            await pilot.pause()
            assert isinstance(app.screen, CheckoutModal)
            assert app.screen.address == "home"
            await pilot.press("enter")
            await pilot.pause()
            assert context.orders.current_order.delivery_address == "home"

    asyncio.run(run())


def test_sign_out_from_profile_returns_to_sign_in(context, provider):
    signed_in(provider)
    app = FoodOrderApp(context)

    async def run() -> None:
        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("p")
            await pilot.pause()
            await pilot.press("k", "enter")
            await pilot.pause()
            assert not context.auth.is_authenticated
            assert isinstance(app.screen, AuthModal)

    asyncio.run(run())
