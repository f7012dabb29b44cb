from typing import List
from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.responses import JSONResponse
from src.database.models.conversation import (
    Conversation,
    ConversationNotFound,
    build_turns,
)
from src.database.models.user_chats import (
    ChatSummary,
    UserChats,
    UserChatsCorrupted,
    UserChatsNotFound,
    make_title,
)
from src.database.mongo_model import UpdateAck
from src.middlewares.auth import get_current_user_id
from src.schemas.chats import ChatContinue, ChatCreate, ErrorResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/chats", status_code=status.HTTP_201_CREATED, response_model=str)
async def create_chat(
    request: ChatCreate,
    user_id: str = Depends(get_current_user_id),
) -> str:
    """
    Start a new chat for the current user.

    Args:
        request (ChatCreate): Opening message.
        user_id (str): Authenticated user id injected by dependency.

    Returns:
        Id of the new conversation.

    Raises:
        HTTPException: 500 for server errors.
    """
    try:
        conversation = await Conversation.start(user_id, request.text)
        await UserChats.ensure_and_append(
            user_id, conversation.id, make_title(request.text)
        )
        return conversation.id

    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Error creating chat for user {user_id}")
        raise HTTPException(status_code=500, detail="Error creating chat!")


@router.get(
    "/userchats",
    response_model=List[ChatSummary],
    responses={404: {"model": ErrorResponse}},
)
async def list_user_chats(user_id: str = Depends(get_current_user_id)):
    """
    List the chat summaries of the current user, oldest first.

    Args:
        user_id (str): Authenticated user id injected by dependency.

    Returns:
        Summaries with id, title and creation time.

    Raises:
        HTTPException: 500 for server errors.
    """
    try:
        return await UserChats.list_for_owner(user_id)

    except UserChatsNotFound:
        logger.info(f"No chats found for user {user_id}")
        return JSONResponse(
            status_code=404, content={"error": "No chats found for this user!"}
        )
    except UserChatsCorrupted as e:
        logger.error(str(e))
        return JSONResponse(status_code=500, content={"error": "Chats data is missing!"})
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Error fetching chats of user {user_id}")
        return JSONResponse(
            status_code=500, content={"error": "Error fetching userchats!"}
        )


@router.get(
    "/chats/{chat_id}",
    response_model=Conversation,
    response_model_exclude_none=True,
)
async def get_chat(
    chat_id: str,
    user_id: str = Depends(get_current_user_id),
) -> Conversation:
    """
    Get a conversation owned by the current user.

    Unlike earlier clients expected, a missing or foreign chat is answered
    with 404 rather than 200 and an empty body; the two cases stay
    indistinguishable so other users' ids can not be enumerated.

    Args:
        chat_id (str): Conversation identifier.
        user_id (str): Authenticated user id injected by dependency.

    Returns:
        The conversation with its full history.

    Raises:
        HTTPException: 404 if not found or not owned (indistinguishable);
            500 for server errors.
    """
    try:
        return await Conversation.find_owned(chat_id, user_id)

    except ConversationNotFound:
        raise HTTPException(status_code=404, detail="Chat not found!")
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Error fetching chat {chat_id}")
        raise HTTPException(status_code=500, detail="Error fetching chat!")


@router.put("/chats/{chat_id}", response_model=UpdateAck)
async def continue_chat(
    chat_id: str,
    request: ChatContinue,
    user_id: str = Depends(get_current_user_id),
) -> UpdateAck:
    """
    Append an exchange to a conversation owned by the current user.

    A question is stored as a user turn (with its optional image) before
    the answer; without a question only the answer is stored.

    Args:
        chat_id (str): Conversation identifier.
        request (ChatContinue): Question, answer and image reference.
        user_id (str): Authenticated user id injected by dependency.

    Returns:
        Update acknowledgment with matched and modified counts.

    Raises:
        HTTPException: 404 if no owned conversation matched; 500 for server errors.
    """
    try:
        ack = await Conversation.append_turns(
            chat_id, user_id, build_turns(request.question, request.answer, request.img)
        )
        if ack.matched_count == 0:
            raise HTTPException(status_code=404, detail="Chat not found!")
        return ack

    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Error adding conversation to chat {chat_id}")
        raise HTTPException(status_code=500, detail="Error adding conversation!")
