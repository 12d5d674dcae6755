import asyncio
import logging
import traceback

import discord
from discord.ext import commands
from discord import app_commands

from smashboard.config import Config
from smashboard.utils.logger import setup_logger

class SmashboardBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        # Attach app command error handler
        self.tree.on_error = self.on_app_command_error
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Smashboard...")
        await self.load_cogs()
        await self._sync_commands()
        self.logger.info("Smashboard setup complete!")

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'smashboard.cogs.leaderboard',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Sync slash commands with Discord"""
        if not self.tree.get_commands():
            self.logger.warning("No application commands found to sync. Check for cog loading errors.")
            return

        try:
            guild_ids = Config.get_guild_ids()

            if guild_ids:
                # Guild-specific sync (instant updates)
                for guild_id in guild_ids:
                    try:
                        guild = discord.Object(id=guild_id)
                        self.tree.copy_global_to(guild=guild)
                        synced = await self.tree.sync(guild=guild)
                        self.logger.info(f"Successfully synced {len(synced)} command(s) to guild {guild_id}")
                    except discord.errors.Forbidden:
                        self.logger.error(f"Permission error syncing to guild {guild_id}. Ensure the bot has the 'application.commands' scope and is in the guild.", exc_info=True)
                    except discord.errors.HTTPException as e:
                        self.logger.error(f"HTTP error syncing to guild {guild_id}. Status: {e.status}, Response: {e.text}", exc_info=True)
            else:
                # Global sync (can take up to 1 hour to propagate)
                synced = await self.tree.sync()
                self.logger.info(f"Successfully synced {len(synced)} command(s) globally")
        except Exception as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)
            # Don't raise - prefix commands keep working

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        await self.change_presence(
            activity=discord.Game(name="Smash Tournament ELO | /leaderboard")
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'
        if isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Permission denied for command '{command_name}' by user {interaction.user}")
            error_message = "❌ You don't have permission to use this command."
        elif isinstance(error, app_commands.CommandOnCooldown):
            error_message = f"❌ Command is on cooldown. Try again in {error.retry_after:.2f} seconds."
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)
            error_message = "❌ An unexpected error occurred while processing your command."

        try:
            error_embed = discord.Embed(title=error_message, color=discord.Color.red())
            if interaction.response.is_done():
                await interaction.followup.send(embed=error_embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=error_embed, ephemeral=True)
        except Exception as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def on_command_error(self, ctx: commands.Context, error: Exception):
        """Global error handler for prefix commands"""
        if isinstance(error, commands.CommandNotFound):
            return

        self.logger.error(f"Unexpected error in command {ctx.command}: {error}")
        self.logger.error(''.join(traceback.format_exception(type(error), error, error.__traceback__)))
        await ctx.send(embed=discord.Embed(
            title="❌ An error occurred",
            description="An unexpected error occurred while processing your command.",
            color=discord.Color.red()
        ))

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Smashboard...")
        # Unloading the cog stops the refresh timers
        for extension in list(self.extensions):
            try:
                await self.unload_extension(extension)
            except Exception as e:
                self.logger.error(f"Failed to unload {extension}: {e}")
        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = SmashboardBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        await bot.close()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
