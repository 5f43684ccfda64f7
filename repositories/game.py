from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.game import Game, GameDTO


class GameRepository:
    @staticmethod
    async def get_by_id(game_id: int, session: AsyncSession | Session) -> GameDTO | None:
        stmt = select(Game).where(Game.id == game_id)
        game = await session_execute(stmt, session)
        game = game.scalar()
        if game is not None:
            return GameDTO.model_validate(game, from_attributes=True)
        else:
            return game

    @staticmethod
    async def create(game_dto: GameDTO, session: AsyncSession | Session) -> int:
        game = Game(**game_dto.model_dump(exclude_none=True))
        session.add(game)
        await session_flush(session)
        return game.id
